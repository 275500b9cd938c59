# softraster

Building blocks for small graphics programs: geometry types, an XML
document model, and a headless viewer loop that drives a renderer and
forwards input events to it.

## Modules

- `softraster.vectors`: immutable `Vector2D`, `Vector3D` and `Vector4D`
  with arithmetic. `Vector3D` adds `norm`, `unit`, `dot` and `cross`.
  `Vector4D` adds `norm`, `unit`, `to_3d` and `project_to_3d`, which divides
  by `w`.
- `softraster.matrix4x4`: `Matrix4x4`, built on numpy. It supports
  `identity`, `zeros`, element access as `m[row, col]`, column access as
  `m[i]`, `det`, `norm` (Frobenius), `T`, `inv`, and products with matrices,
  `Vector4D` and scalars. `inv` raises `ValueError` for a singular matrix.
  `outer(u, v)` gives the outer product.
- `softraster.quaternion`: `Quaternion` (identity by default). It can be
  built with `from_axis_angle`, `from_scaled_axis` and `from_euler`. It has
  `product` (also `*`), `conjugate`, `inverse`, `matrix`, `right_matrix`,
  `rotation_matrix` (a 3x3 numpy array), `rotated_vector`, `scaled_axis`,
  `euler` (roll, pitch, yaw), `decouple_z` and `slerp`.
- `softraster.viewer`: `Viewer`, a window-less update loop. `init()` sets
  up the renderer. `update()` renders one frame and refreshes the on-screen
  text lines in `viewer.lines`, which hold the frame rate and the renderer's
  `info()`. `start()` runs frames until `close()` is called. The
  `*_callback` methods forward resize, cursor, scroll, mouse and key events
  to the renderer. In HDPI mode, cursor coordinates are doubled. Escape
  closes the viewer and the grave accent key toggles the info display. Any
  object that matches the `Renderer` protocol can be driven. The clock can be
  replaced through `viewer.clock`.
- `softraster.xmlnodes`: the node tree. It has `XMLElement` with ordered
  attributes and typed access (`int_attribute`, `float_attribute`,
  `bool_attribute`, `unsigned_attribute`, `int_text`, …), `XMLText`,
  `XMLComment`, `XMLDeclaration` and `XMLUnknown`. It also provides an
  `XMLVisitor` interface and the conversion helpers `to_int`, `to_unsigned`,
  `to_bool`, `to_float` and `format_value`. A failed typed read raises
  `XMLAttributeError`, whose `code` is an `XMLError`.
- `softraster.xmlprinter`: `XMLPrinter`, which writes to a stream or to
  memory (`getvalue()`), with indented or compact output. Output can be
  streamed call by call (`open_element`, `push_attribute`, `push_text`,
  `close_element`, …) or produced by visiting a tree. `escape()` replaces
  markup characters with entities.
- `softraster.xmldocument`: `XMLDocument` parses text or bytes
  (`parse`), reads and writes files (`load_file`, `save_file`), serialises
  (`to_string`), and creates nodes (`new_element`, `new_text`, …). Malformed
  input raises `XMLParseError` with an `XMLError` code. Whitespace can be
  preserved or collapsed. `XMLHandle` chains navigation through nodes that
  may be missing.

## Examples

Rotating a vector with a quaternion:

```python
import math

from softraster.quaternion import Quaternion
from softraster.vectors import Vector3D

q = Quaternion.from_axis_angle(Vector3D(0, 0, 1), math.pi / 2)
print(q.rotated_vector(Vector3D(1, 0, 0)))   # approximately (0,1,0)
```

Working with 4x4 matrices:

```python
from softraster.matrix4x4 import Matrix4x4

m = Matrix4x4.identity()
print(m.det())          # 1.0
print(m * m.inv())      # the identity again
```

Reading and writing XML:

```python
from softraster.xmldocument import XMLDocument, XMLHandle

doc = XMLDocument()
doc.parse('<svg width="100" height="50"><rect x="1"/></svg>')
root = doc.root_element()
print(root.float_attribute("width"))                      # 100.0
print(XMLHandle(doc).first_child_element("svg")
      .first_child_element("rect").to_element().attribute("x"))  # 1
print(doc.to_string(compact=True))
# <svg width="100" height="50"><rect x="1"/></svg>
```

Driving a renderer with the viewer:

```python
from softraster.viewer import PRESS, Viewer

class Counter:
    def __init__(self): self.frames = 0
    def init(self): pass
    def render(self): self.frames += 1
    def resize(self, width, height): pass
    def name(self): return "Counter"
    def info(self): return f"{self.frames} frames"
    def cursor_event(self, x, y): pass
    def scroll_event(self, dx, dy): pass
    def mouse_event(self, key, event, mods): pass
    def keyboard_event(self, key, event, mods): pass

viewer = Viewer(Counter())
viewer.init()
viewer.update()
print(viewer.lines["renderer"].text)   # 1 frames
```

## What this package does not do

softraster does not rasterize shapes. It has no supersample buffer,
framebuffer or texture sampling. It does not load or draw vector drawings,
and it provides no command-line program.

`Viewer` opens no window and draws nothing on screen. It only runs the
loop, keeps the on-screen text in memory and dispatches events. Displaying
the result is left to the renderer you supply.