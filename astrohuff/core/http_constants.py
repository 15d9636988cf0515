"""Constantes HTTP et métier pour éviter les valeurs magiques dans le code."""

# Codes de statut HTTP courants
HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409
HTTP_UNPROCESSABLE = 422
HTTP_TOO_MANY_REQUESTS = 429
HTTP_INTERNAL_SERVER_ERROR = 500
HTTP_BAD_GATEWAY = 502

HTTP_SUCCESS_MIN = 200
HTTP_SUCCESS_MAX = 300

# En-tête identifiant un client anonyme (navigateur) pour l'aperçu IA
CLIENT_ID_HEADER = "X-Client-ID"
