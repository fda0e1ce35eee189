"""Portal Operations Package"""

from portal.operations.base_operation import BaseOperation, RenderedFile

__all__ = ["BaseOperation", "RenderedFile"]
