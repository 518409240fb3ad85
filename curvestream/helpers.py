import contextlib, math, os
from typing import ClassVar, Tuple

# context variable management from: https://github.com/tinygrad/tinygrad/blob/master/tinygrad/helpers.py
def getenv(key:str, default=0): return type(default)(os.getenv(key, default))

class Context(contextlib.ContextDecorator):
  def __init__(self, **kwargs): self.kwargs = kwargs
  def __enter__(self):
    self.old_context:dict[str, int] = {k:v.value for k,v in ContextVar._cache.items()}
    for k,v in self.kwargs.items(): ContextVar._cache[k].value = v
  def __exit__(self, *args):
    for k,v in self.old_context.items(): ContextVar._cache[k].value = v

class ContextVar:
  _cache: ClassVar[dict[str, "ContextVar"]] = {}
  value: int
  key: str
  def __init__(self, key, default_value):
    if key in ContextVar._cache: raise RuntimeError(f"attempt to recreate ContextVar {key}")
    ContextVar._cache[key] = self
    self.value, self.key = getenv(key, default_value), key
  def __bool__(self): return bool(self.value)
  def __ge__(self, x): return self.value >= x
  def __gt__(self, x): return self.value > x
  def __lt__(self, x): return self.value < x

# DEBUG: extra decoding diagnostics in the log. WORKERS: threads used to resolve glyphs, <= 1 means sequential
DEBUG, WORKERS = ContextVar("DEBUG", 0), ContextVar("WORKERS", 0)

def fully_flatten(l): # from tinygrad repo
  if hasattr(l, "__len__") and hasattr(l, "__getitem__") and not isinstance(l, str):
    flattened = []
    for li in l: flattened.extend(fully_flatten(li))
    return flattened
  return [l]

LINEAR_EPSILON = 1e-4 # below this the leading coefficient counts as zero: the segment is a straight line

def quadratic_roots(a:float, b:float, c:float) -> Tuple[float, ...]:
  """Real roots of a*t^2 + b*t + c = 0. Returns 0, 1 or 2 values.
  A (near) zero `a` is solved as the line b*t + c = 0. If that line is flat, every t is a root when c == 0 (0 is returned as representative), else none is."""
  if abs(a) < LINEAR_EPSILON:
    if b != 0: return (-c / b,)
    return (0.0,) if c == 0 else ()
  if (d:=b*b - 4*a*c) < 0: return ()
  s = math.sqrt(d)
  return ((-b + s) / (2*a), (-b - s) / (2*a))
