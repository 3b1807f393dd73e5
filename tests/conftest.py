"""共通フィクスチャ。

- GL を使わない ModernGL コンテキストの代役（`FakeContext`）
- レイアウト/密度を差し替えられるウィンドウの代役（`FakeLayout`）
- `LAVA_*` 環境変数の隔離
"""

from __future__ import annotations

from typing import Any, Iterator

import moderngl
import pytest

from common import settings


class FakeUniform:
    def __init__(self, name: str) -> None:
        self.name = name
        self.writes: list[Any] = []

    @property
    def value(self) -> Any:
        return self.writes[-1] if self.writes else None

    @value.setter
    def value(self, v: Any) -> None:
        self.writes.append(v)


class FakeProgramHandle:
    """ソース文字列に現れる名前だけを active とみなすプログラム。"""

    def __init__(self, vertex_shader: str, fragment_shader: str) -> None:
        self.vertex_shader = vertex_shader
        self.fragment_shader = fragment_shader
        self._members: dict[str, FakeUniform] = {}
        self.released = False

    def __getitem__(self, name: str) -> FakeUniform:
        if name not in self.vertex_shader and name not in self.fragment_shader:
            raise KeyError(name)
        return self._members.setdefault(name, FakeUniform(name))

    def release(self) -> None:
        self.released = True


class FakeBuffer:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.released = False

    def release(self) -> None:
        self.released = True


class FakeVertexArray:
    def __init__(self, ctx: "FakeContext", program: Any, content: list[tuple]) -> None:
        self.ctx = ctx
        self.program = program
        self.content = content
        self.renders: list[tuple[int, int]] = []
        self.released = False

    def render(self, mode: int, vertices: int = -1) -> None:
        self.renders.append((mode, vertices))
        self.ctx.events.append(("render", self.program, vertices))

    def release(self) -> None:
        self.released = True


class FakeTexture:
    def __init__(self, ctx: "FakeContext", size: tuple[int, int], components: int) -> None:
        self.ctx = ctx
        self.size = size
        self.components = components
        self.filter: tuple[int, int] | None = None
        self.released = False

    def use(self, location: int = 0) -> None:
        self.ctx.events.append(("texture.use", location))

    def release(self) -> None:
        self.released = True


class FakeFramebuffer:
    def __init__(self, ctx: "FakeContext", name: str, size: tuple[int, int] = (0, 0)) -> None:
        self.ctx = ctx
        self.name = name
        self.size = size
        self.viewport: tuple[int, int, int, int] = (0, 0, *size)
        self.released = False

    def use(self) -> None:
        self.ctx.events.append(("use", self.name))

    def release(self) -> None:
        self.released = True


class FakeContext:
    """`ctx.program/buffer/vertex_array/texture/framebuffer/screen` だけを持つ代役。

    `fail_with` にメッセージを入れると `program()` が `moderngl.Error` を送出する。
    """

    def __init__(self) -> None:
        self.events: list[tuple] = []
        self.programs: list[FakeProgramHandle] = []
        self.buffers: list[FakeBuffer] = []
        self.vertex_arrays: list[FakeVertexArray] = []
        self.textures: list[FakeTexture] = []
        self.framebuffers: list[FakeFramebuffer] = []
        self.screen = FakeFramebuffer(self, "screen")
        self.fail_with: str | None = None
        self.error = "GL_NO_ERROR"
        self.info = {"GL_VERSION": "fake"}

    def program(self, *, vertex_shader: str, fragment_shader: str) -> FakeProgramHandle:
        if self.fail_with is not None:
            raise moderngl.Error(self.fail_with)
        handle = FakeProgramHandle(vertex_shader, fragment_shader)
        self.programs.append(handle)
        return handle

    def buffer(self, data: bytes) -> FakeBuffer:
        buf = FakeBuffer(data)
        self.buffers.append(buf)
        return buf

    def vertex_array(self, program: Any, content: list[tuple]) -> FakeVertexArray:
        vao = FakeVertexArray(self, program, content)
        self.vertex_arrays.append(vao)
        return vao

    def texture(self, size: tuple[int, int], components: int) -> FakeTexture:
        tex = FakeTexture(self, size, components)
        self.textures.append(tex)
        self.events.append(("texture", size))
        return tex

    def framebuffer(self, color_attachments: list[FakeTexture]) -> FakeFramebuffer:
        fbo = FakeFramebuffer(self, f"fbo{len(self.framebuffers)}", color_attachments[0].size)
        self.framebuffers.append(fbo)
        return fbo


class FakeLayout:
    """LayoutSource + `screen_size()` + フレーム要求キュー。"""

    def __init__(self, size: tuple[float, float] = (800.0, 600.0), density: float = 1.0) -> None:
        self.size = size
        self.density = density
        self.pending: list[Any] = []

    def layout_size(self) -> tuple[float, float]:
        return self.size

    def pixel_density(self) -> float:
        return self.density

    def screen_size(self) -> tuple[int, int]:
        return int(self.size[0] * self.density), int(self.size[1] * self.density)

    def request_frame(self, callback: Any) -> None:
        self.pending.append(callback)

    def fire(self, timestamp: float) -> int:
        """保留中の要求を処理して処理件数を返す（`on_draw` 相当）。"""
        callbacks, self.pending = self.pending, []
        for cb in callbacks:
            cb(timestamp)
        return len(callbacks)


@pytest.fixture()
def fake_ctx() -> FakeContext:
    return FakeContext()


@pytest.fixture()
def layout() -> FakeLayout:
    return FakeLayout()


@pytest.fixture()
def make_layout():
    return FakeLayout


@pytest.fixture(autouse=True)
def isolate_lava_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """`LAVA_*` を消した状態で設定を読み直し、テスト後にも戻す。"""
    for key in (
        "LAVA_MAX_PIXEL_DENSITY",
        "LAVA_GL_ERROR_POLL",
        "LAVA_GL_ERROR_POLL_INTERVAL",
        "LAVA_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    settings.reload_from_env()
    yield
    monkeypatch.undo()
    settings.reload_from_env()
