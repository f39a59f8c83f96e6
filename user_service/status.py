"""
HTTP status codes returned by the user service controllers.

Named constants in the style of ``arxiv.base.status``, kept here so the
service does not depend on arxiv-base.
"""

HTTP_200_OK = 200
HTTP_400_BAD_REQUEST = 400
HTTP_401_UNAUTHORIZED = 401
HTTP_503_SERVICE_UNAVAILABLE = 503
