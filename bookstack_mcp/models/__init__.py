from .params import SCHEMAS, ContentType, ExportFormat, Params

__all__ = ["SCHEMAS", "ContentType", "ExportFormat", "Params"]
