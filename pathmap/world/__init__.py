"""Board construction: grid, node placement, graph building and path tessellation."""
