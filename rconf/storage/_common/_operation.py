class StoreOperation:
    GET = "get"
    PUT = "put"
    DELETE = "delete"
    CLOSE = "close"
