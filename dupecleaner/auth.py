from requests.auth import AuthBase


class ApiKeyAuth(AuthBase):
    """
    Attaches the Immich API key (and JSON accept header) to every request
    sent through the session.
    """

    header_name = "x-api-key"

    def __init__(self, api_key: str):
        self.api_key = api_key

    def __call__(self, request):
        request.headers[self.header_name] = self.api_key
        request.headers.setdefault("Accept", "application/json")
        return request

    def __repr__(self):
        # Never leak the key into logs
        return f"{type(self).__name__}(api_key='***')"
