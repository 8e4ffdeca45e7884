# どこで: `src/gizmesh/interactive/gl/shader.py`。
# 何を: オーバーレイ描画用の GLSL プログラムを生成する。
# なぜ: 単色（ベジェ曲線）と頂点色（ギズモ）を 1 つのプログラムで切り替えて描くため。

from __future__ import annotations

from typing import Any

VERTEX_SHADER = """
#version 330
uniform mat4 projection;
in vec2 in_vert;
in vec4 in_color;
out vec4 v_color;
void main() {
    gl_Position = projection * vec4(in_vert, 0.0, 1.0);
    v_color = in_color;
}
"""

FRAGMENT_SHADER = """
#version 330
uniform vec4 color;
uniform bool use_vertex_color;
in vec4 v_color;
out vec4 frag_color;
void main() {
    frag_color = use_vertex_color ? v_color : color;
}
"""


class Shader:
    """シェーダープログラムの生成窓口。"""

    @staticmethod
    def create_shader(ctx: Any) -> Any:
        return ctx.program(vertex_shader=VERTEX_SHADER, fragment_shader=FRAGMENT_SHADER)
