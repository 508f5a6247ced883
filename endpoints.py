# REST routes of the file-storage server; update if the server routes change.

BASE_URL = "http://localhost:5000"

AUTH = {
    "login": {
        "method": "POST",
        "path": "/api/auth/login",
    },
    "refresh": {
        "method": "POST",
        "path": "/api/auth/refresh-token",
    },
    "logout": {
        "method": "POST",
        "path": "/api/auth/logout",
    },
}

FILES = {
    "list": {
        "method": "GET",
        "path": "/api/files",
    },
    "recent": {
        "method": "GET",
        "path": "/api/files/recent",
    },
    "create_folder": {
        "method": "POST",
        "path": "/api/files/folder",
    },
    "upload": {
        "method": "POST",
        "path": "/api/files/upload",
    },
    "delete": {
        "method": "DELETE",
        "path": "/api/files/{id}",
    },
}
