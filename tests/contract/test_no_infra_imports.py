import ast
import pathlib

API_ROOT = pathlib.Path(__file__).resolve().parents[2] / "src" / "access" / "api"


def test_no_infrastructure_imports_in_api():
    files = list(API_ROOT.glob("**/*.py"))
    assert files
    for api_py in files:
        tree = ast.parse(api_py.read_text(encoding="utf-8"))
        for node in ast.walk(tree):
            if isinstance(node, ast.ImportFrom):
                if node.module and node.module.startswith("access.infrastructure"):
                    raise AssertionError(f"Infrastructure import in API file: {api_py} -> from {node.module} import ...")
            if isinstance(node, ast.Import):
                for n in node.names:
                    if n.name.startswith("access.infrastructure"):
                        raise AssertionError(f"Infrastructure import in API file: {api_py} -> import {n.name}")
