import math
from dataclasses import dataclass
from typing import Union

@dataclass(frozen=True)
class vec2:
    x:float
    y:float
    def mag(self) -> float: return math.hypot(self.x, self.y)
    def dot(self, other:"vec2") -> float: return self.x * other.x + self.y * other.y
    def lerp(self, other:"vec2", t:float) -> "vec2": return vec2(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)
    def components(self): return [self.x, self.y]
    def __iter__(self): return iter((self.x, self.y))
    def __add__(self, other:Union["vec2", int, float]):
        return vec2(self.x + other.x, self.y + other.y) if isinstance(other, vec2) else vec2(self.x + other, self.y + other)
    def __sub__(self, other:Union["vec2", int, float]):
        return vec2(self.x - other.x, self.y - other.y) if isinstance(other, vec2) else vec2(self.x - other, self.y - other)
    def __mul__(self, other:Union["vec2", int, float]):
        return vec2(self.x * other.x, self.y * other.y) if isinstance(other, vec2) else vec2(self.x * other, self.y * other)
    def __rmul__(self, other): return self * other
    def __truediv__(self, other:Union["vec2", int, float]):
        return vec2(self.x / other.x, self.y / other.y) if isinstance(other, vec2) else vec2(self.x / other, self.y / other)
    def __neg__(self): return vec2(-self.x, -self.y)
    def __repr__(self): return f"vec2({self.x}, {self.y})"
