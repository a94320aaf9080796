from .jsonc import loads_jsonc, strip_json_comments

__all__ = ["loads_jsonc", "strip_json_comments"]
