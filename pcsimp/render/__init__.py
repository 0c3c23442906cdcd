from .session import DrawData, RenderSession, WindowSpec

__all__ = ["DrawData", "RenderSession", "WindowSpec"]
