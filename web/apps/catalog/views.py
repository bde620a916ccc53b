"""Read-only catalog endpoints. All of them are public."""

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.pagination import PageQuery
from apps.common.validation import parse

from .repository import ProductCatalog
from .schemas import SearchQuery, page_body, product_body


class ProductListView(APIView):
    def get(self, request):
        query = parse(PageQuery, request.query_params.dict())
        items, total = ProductCatalog().list_products(query)
        return Response(page_body(items, total))


class ProductSearchView(APIView):
    """Case-insensitive name search, ``GET /products/search?q=&page=&limit=``."""

    def get(self, request):
        query = parse(SearchQuery, request.query_params.dict())
        items, total = ProductCatalog().search_products(query.q.strip(), query)
        return Response(page_body(items, total))


class ProductDetailView(APIView):
    def get(self, request, product_id: int):
        return Response(product_body(ProductCatalog().get_product(product_id)))
