from http import HTTPStatus

# Reason phrases for the registered status codes, used when a response
# does not define its own message.
HTTP_STATUS: dict[int, str] = {_.value: _.phrase for _ in HTTPStatus}

# EOF
