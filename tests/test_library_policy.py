from __future__ import annotations

import ast
from pathlib import Path

import moevo


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _call_name(node: ast.Call) -> str | None:
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        if isinstance(func.value, ast.Name):
            return f"{func.value.id}.{func.attr}"
        return func.attr
    return None


def _library_calls():
    repo_root = _repo_root()
    for path in (repo_root / "src" / "moevo").rglob("*.py"):
        rel_path = path.relative_to(repo_root).as_posix()
        text = path.read_text(encoding="utf-8-sig")
        try:
            tree = ast.parse(text)
        except SyntaxError as exc:  # pragma: no cover - should not happen
            raise AssertionError(f"Failed to parse {rel_path}: {exc}") from exc
        for node in ast.walk(tree):
            if isinstance(node, ast.Call):
                yield rel_path, node


def test_no_prints_in_library() -> None:
    violations = [
        f"{rel_path}:{getattr(node, 'lineno', '?')}: {_call_name(node)}()"
        for rel_path, node in _library_calls()
        if _call_name(node) in {"print", "pprint", "pprint.pprint"}
    ]
    if violations:
        msg = ["print() is forbidden in library modules:"]
        msg.extend(f"- {item}" for item in sorted(violations))
        raise AssertionError("\n".join(msg))


def test_logging_policy() -> None:
    violations = [
        f"{rel_path}:{getattr(node, 'lineno', '?')}: logging.basicConfig"
        for rel_path, node in _library_calls()
        if (_call_name(node) or "").endswith("basicConfig")
    ]
    if violations:
        msg = ["logging.basicConfig is forbidden in library modules:"]
        msg.extend(f"- {item}" for item in sorted(violations))
        raise AssertionError("\n".join(msg))


def test_public_api_exports_resolve() -> None:
    missing = [name for name in moevo.__all__ if not hasattr(moevo, name)]
    assert not missing, f"moevo.__all__ lists undefined names: {missing}"
    assert len(set(moevo.__all__)) == len(moevo.__all__)
