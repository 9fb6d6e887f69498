"""
Import-boundary enforcement.

1. Kernel independence -- stock_kernel/** may not import stock_modules or
                          stock_config.
2. Domain purity       -- stock_kernel/domain/** may not import the ORM,
                          DB drivers, or kernel db/models/services.
3. Config direction    -- stock_config/** may import the kernel, never
                          stock_modules.
4. Module isolation    -- orchestrator packages do not import each other
                          except through the composition root.

All scanning is done via AST; these tests are read-only.
"""

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def _python_files(package: str) -> list[Path]:
    return sorted((ROOT / package).rglob("*.py"))


def _extract_imports(filepath: Path) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    tree = ast.parse(filepath.read_text(encoding="utf-8"), filename=str(filepath))
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom) and node.module:
            results.append((node.lineno, node.module))
    return results


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for filepath in _python_files(package):
        for lineno, module in _extract_imports(filepath):
            if _matches_any(module, forbidden):
                found.append(f"  {filepath.relative_to(ROOT)}:{lineno} imports '{module}'")
    return found


class TestKernelIndependence:

    def test_packages_exist(self):
        for package in ("stock_kernel", "stock_modules", "stock_config"):
            assert _python_files(package), f"{package} has no Python files"

    def test_kernel_imports_nothing_above_it(self):
        violations = _violations("stock_kernel", ("stock_modules", "stock_config", "scripts"))
        assert not violations, (
            "stock_kernel/** must not import modules, config or scripts:\n"
            + "\n".join(violations)
        )


class TestDomainPurity:

    FORBIDDEN_PREFIXES = (
        "sqlalchemy",
        "psycopg2",
        "sqlite3",
        "yaml",
        "stock_kernel.db",
        "stock_kernel.models",
        "stock_kernel.services",
        "stock_kernel.selectors",
    )

    def test_domain_has_no_io_imports(self):
        violations = _violations("stock_kernel/domain", self.FORBIDDEN_PREFIXES)
        assert not violations, (
            "stock_kernel/domain/** must stay free of I/O layers:\n"
            + "\n".join(violations)
        )


class TestConfigDirection:

    def test_config_never_imports_modules(self):
        violations = _violations("stock_config", ("stock_modules", "scripts"))
        assert not violations, (
            "stock_config/** may depend on the kernel only:\n" + "\n".join(violations)
        )

    def test_only_bridges_import_the_kernel(self):
        offenders = [
            v for v in _violations("stock_config", ("stock_kernel",))
            if "bridges.py" not in v
        ]
        assert not offenders, (
            "Only stock_config/bridges.py translates config into kernel types:\n"
            + "\n".join(offenders)
        )


class TestModuleIsolation:

    ORCHESTRATORS = ("transfers", "daily_log", "catalogue")

    def test_orchestrators_do_not_import_each_other(self):
        violations = []
        for name in self.ORCHESTRATORS:
            others = tuple(f"stock_modules.{o}" for o in self.ORCHESTRATORS if o != name)
            violations += _violations(f"stock_modules/{name}", others)
        assert not violations, (
            "Orchestrators share state through ClientState, not imports:\n"
            + "\n".join(violations)
        )

    def test_modules_never_import_config_except_app(self):
        offenders = [
            v for v in _violations("stock_modules", ("stock_config",))
            if "app.py" not in v
        ]
        assert not offenders, (
            "Only stock_modules/app.py reads configuration:\n" + "\n".join(offenders)
        )
