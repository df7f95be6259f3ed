"""Rendering subpackage.

Turns a :class:`~level_builder.grid.BlockGrid` into a 1920x1080 RGBA bitmap
and caches the result until the grid changes:

* :mod:`level_builder.renderer.texture` - the ``Rasterizer`` protocol and a
  Pillow based reference rasterizer drawing PNG assets from disk.
* :mod:`level_builder.renderer.cache` - ``RenderCache``, the single owned
  bitmap plus its staleness flag.
"""
