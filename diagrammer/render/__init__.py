from diagrammer.render.renderer import RenderError, RenderErrorKind, Renderer

__all__ = ["RenderError", "RenderErrorKind", "Renderer"]
