class LayoutError(Exception):
    pass


class GraphError(LayoutError):
    pass


class GeometryError(LayoutError, ValueError):
    pass
