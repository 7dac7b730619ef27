from __future__ import annotations

import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPT = ROOT / "scripts" / "render_mobiledoc.py"


def _write_json(path: Path, payload: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _run(*args: str, cwd: Path = ROOT, env_path: Path | None = None) -> subprocess.CompletedProcess[str]:
    env = None
    if env_path is not None:
        env = {**os.environ, "PYTHONPATH": str(env_path)}
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )


def _sample_doc() -> dict[str, object]:
    return {
        "version": "0.3.1",
        "atoms": [],
        "cards": [["caption", {"text": "A cat"}]],
        "markups": [["strong"]],
        "sections": [
            [1, "p", [[0, [0], 1, "hi"]]],
            [10, 0],
        ],
    }


def test_render_html_default(tmp_path: Path) -> None:
    doc_path = _write_json(tmp_path / "post.json", _sample_doc())
    proc = _run(str(doc_path))
    assert proc.returncode == 0, proc.stdout + proc.stderr
    # The caption card is not registered, so only the paragraph renders.
    assert proc.stdout.strip() == "<p><strong>hi</strong></p>"


def test_render_json_with_extensions(tmp_path: Path) -> None:
    (tmp_path / "post_cards.py").write_text(
        textwrap.dedent(
            """
            from mobiledoc_tree.types import Node

            def caption(context):
                context.env.did_render(lambda: None)
                return Node(type="figcaption", children=[context.payload["text"]], key=context.key)
            """
        ),
        encoding="utf-8",
    )
    ext_path = _write_json(tmp_path / "extensions.json", {"cards": {"caption": "post_cards:caption"}})
    doc_path = _write_json(tmp_path / "post.json", _sample_doc())

    proc = _run(
        str(doc_path),
        "--extensions",
        str(ext_path),
        "--format",
        "json",
        env_path=tmp_path,
    )
    assert proc.returncode == 0, proc.stdout + proc.stderr
    payload = json.loads(proc.stdout)
    assert payload["render_callback_count"] == 1
    assert [node["type"] for node in payload["nodes"]] == ["p", "figcaption"]
    assert payload["nodes"][1]["children"] == ["A cat"]


def test_render_rejects_malformed_document(tmp_path: Path) -> None:
    doc_path = _write_json(tmp_path / "bad.json", {"sections": [[1, "p", [[0, [], 0]]]]})
    proc = _run(str(doc_path))
    assert proc.returncode == 2
    assert "Cannot render" in proc.stderr


def test_render_rejects_out_of_range_markup(tmp_path: Path) -> None:
    doc_path = _write_json(tmp_path / "bad.json", {"sections": [[1, "p", [[0, [4], 1, "x"]]]]})
    proc = _run(str(doc_path))
    assert proc.returncode == 2
    assert "markups[4]" in proc.stderr


def test_render_rejects_non_object_extensions(tmp_path: Path) -> None:
    ext_path = _write_json(tmp_path / "extensions.json", [["cards"]])
    doc_path = _write_json(tmp_path / "post.json", _sample_doc())
    proc = _run(str(doc_path), "--extensions", str(ext_path))
    assert proc.returncode == 2
    assert "Failed to load extensions" in proc.stderr
