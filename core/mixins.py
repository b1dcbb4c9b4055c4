from django.http import Http404

from .exceptions import ResourceNotFound
from .responses import api_response


class EnvelopeMixin:
    """
    Mixin for generic views: wraps list/retrieve payloads in the success
    envelope and turns a missing object into a titled 404.
    """
    list_message = 'Retrieved successfully'
    retrieve_message = 'Retrieved successfully'
    not_found_error = 'Resource not found'

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            lookup = self.kwargs.get(self.lookup_url_kwarg or self.lookup_field)
            raise ResourceNotFound(self.not_found_error, f"No record found with id '{lookup}'")

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return api_response(serializer.data, self.list_message)

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance)
        return api_response(serializer.data, self.retrieve_message)
