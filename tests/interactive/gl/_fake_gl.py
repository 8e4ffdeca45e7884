"""
どこで: tests/interactive/gl/_fake_gl.py。
何を: moderngl.Context の代わりに使う最小の偽実装。
なぜ: GL コンテキスト無しで GpuMesh/OverlayRenderer の転送・再確保ロジックを検証するため。
"""

from __future__ import annotations

from typing import Any


class FakeBuffer:
    def __init__(self, reserve: int) -> None:
        self.size = int(reserve)
        self.data = b""
        self.orphans = 0
        self.released = False

    def orphan(self) -> None:
        self.orphans += 1

    def write(self, data: bytes) -> None:
        assert len(data) <= self.size
        self.data = bytes(data)

    def release(self) -> None:
        self.released = True


class FakeVertexArray:
    def __init__(self, content: list[tuple[Any, str, str]], index_buffer: Any | None) -> None:
        self.content = content
        self.index_buffer = index_buffer
        self.renders: list[tuple[int, int]] = []
        self.released = False

    @property
    def attributes(self) -> tuple[str, ...]:
        return tuple(name for _buf, _fmt, name in self.content)

    def render(self, mode: int, vertices: int) -> None:
        self.renders.append((mode, vertices))

    def release(self) -> None:
        self.released = True


class FakeUniform:
    def __init__(self) -> None:
        self.value: Any = None
        self.written: bytes | None = None

    def write(self, data: bytes) -> None:
        self.written = bytes(data)


class FakeProgram(dict):
    def __missing__(self, key: str) -> FakeUniform:
        uniform = FakeUniform()
        self[key] = uniform
        return uniform

    def release(self) -> None:
        self.released = True


class FakeContext:
    LINE_STRIP = 3
    TRIANGLES = 4

    def __init__(self) -> None:
        self.buffers: list[FakeBuffer] = []
        self.vertex_arrays: list[FakeVertexArray] = []
        self.viewport: tuple[int, int, int, int] | None = None
        self.line_width = 1.0
        self.cleared: list[tuple[float, ...]] = []

    def buffer(self, *, reserve: int, dynamic: bool = False) -> FakeBuffer:
        buf = FakeBuffer(reserve)
        self.buffers.append(buf)
        return buf

    def vertex_array(
        self,
        program: Any,
        content: list[tuple[Any, str, str]],
        index_buffer: Any | None = None,
        index_element_size: int = 4,
    ) -> FakeVertexArray:
        assert index_element_size == 4
        vao = FakeVertexArray(list(content), index_buffer)
        self.vertex_arrays.append(vao)
        return vao

    def program(self, *, vertex_shader: str, fragment_shader: str) -> FakeProgram:
        assert "in_vert" in vertex_shader
        return FakeProgram()

    def clear(self, *color: float) -> None:
        self.cleared.append(tuple(color))
