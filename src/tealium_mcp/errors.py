class TealiumError(Exception):
    """Base error for everything raised by the tealium_mcp package."""

    code = "TEALIUM_ERROR"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ParseError(TealiumError):
    """A tracking spec could not be parsed from CSV or JSON content."""

    code = "PARSE_ERROR"

    def __init__(self, message: str, source: str):
        super().__init__(message)
        self.source = source


class SchemaError(TealiumError):
    code = "SCHEMA_ERROR"

    def __init__(self, message: str, schema_uri: str):
        super().__init__(message)
        self.schema_uri = schema_uri


class ToolArgumentError(TealiumError):
    code = "TOOL_ARGUMENT_ERROR"

    def __init__(self, tool_name: str, argument_name: str, message: str):
        super().__init__(message)
        self.tool_name = tool_name
        self.argument_name = argument_name


class ResourceNotFoundError(TealiumError):
    code = "RESOURCE_NOT_FOUND"

    def __init__(self, uri: str):
        super().__init__(f"Resource not found: {uri}")
        self.uri = uri
