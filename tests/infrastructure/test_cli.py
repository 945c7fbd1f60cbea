"""Tests for the click front end.

Commands run against an injected StoreContext wrapping the in-memory
fake store, except the last class which goes through configuration and
the JSON-file backend.
"""

import pytest
from click.testing import CliRunner

from invtrack.infrastructure.bootstrap import StoreContext
from invtrack.infrastructure.cli.main import cli
from tests.fakes import FakeProductStore

SEED = {
    "k1": {"name": "Bolts", "category": "Hardware", "stock": 4, "price": 0.25},
    "k2": {"name": "Hammer", "category": "Tools", "stock": 12, "price": 19.99},
}


@pytest.fixture
def store():
    return FakeProductStore(SEED)


def _run(store, args, input=None):
    runner = CliRunner()
    return runner.invoke(
        cli, ["--timeout", "1", *args], obj=StoreContext(store=store), input=input
    )


class TestProductList:

    def test_lists_products_and_flags_low_stock(self, store):
        result = _run(store, ["product", "list"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        bolts = next(line for line in lines if "Bolts" in line)
        hammer = next(line for line in lines if "Hammer" in line)
        assert bolts.endswith("LOW")
        assert "$0.25" in bolts
        assert not hammer.endswith("LOW")
        assert store.subscriber_count == 0

    def test_unreadable_record_is_listed(self):
        store = FakeProductStore({
            **SEED,
            "bad": {"name": "Broken", "stock": 2.5, "price": 3},
        })
        result = _run(store, ["product", "list"])
        assert result.exit_code == 0, result.output
        broken = next(line for line in result.output.splitlines() if "Broken" in line)
        assert broken.startswith("bad")
        assert broken.endswith("UNREADABLE")

    def test_empty_collection(self):
        result = _run(FakeProductStore(), ["product", "list"])
        assert result.exit_code == 0
        assert "No products found." in result.output


class TestProductAdd:

    def test_adds_product(self, store):
        result = _run(store, [
            "product", "add", "--name", "Widget", "--stock", "3", "--price", "2.50",
        ])
        assert result.exit_code == 0, result.output
        assert "Product #k1 'Widget' added" in result.output
        assert store.calls_named("create") == [
            ("create", "products", {"name": "Widget", "category": "", "stock": 3, "price": 2.5})
        ]

    def test_invalid_input_warns_and_fails(self, store):
        result = _run(store, [
            "product", "add", "--name", "Widget", "--stock", "", "--price", "2.50",
        ])
        assert result.exit_code == 1
        assert "Please fill all required fields" in result.output
        assert store.calls_named("create") == []


class TestProductEdit:

    def test_updates_only_given_fields(self, store):
        result = _run(store, ["product", "edit", "--id", "k2", "--stock", "8"])
        assert result.exit_code == 0, result.output
        assert store.calls_named("update") == [
            ("update", "products/k2",
             {"name": "Hammer", "category": "Tools", "stock": 8, "price": 19.99})
        ]

    def test_unknown_id(self, store):
        result = _run(store, ["product", "edit", "--id", "zz", "--stock", "8"])
        assert result.exit_code == 1
        assert "not found" in result.output
        assert store.calls_named("update") == []

    def test_invalid_value_rejected(self, store):
        result = _run(store, ["product", "edit", "--id", "k2", "--price", "free"])
        assert result.exit_code == 1
        assert "Invalid money amount" in result.output
        assert store.calls_named("update") == []


class TestProductDelete:

    def test_confirmed(self, store):
        result = _run(store, ["product", "delete", "--id", "k1"], input="y\n")
        assert result.exit_code == 0, result.output
        assert store.calls_named("remove") == [("remove", "products/k1")]
        assert "deleted" in result.output

    def test_declined(self, store):
        result = _run(store, ["product", "delete", "--id", "k1"], input="n\n")
        assert result.exit_code == 0
        assert store.calls_named("remove") == []
        assert "Cancelled." in result.output

    def test_yes_flag_skips_prompt(self, store):
        result = _run(store, ["product", "delete", "--id", "k1", "--yes"])
        assert result.exit_code == 0
        assert "Are you sure" not in result.output
        assert store.calls_named("remove") == [("remove", "products/k1")]


    def test_unreadable_record_can_be_deleted(self):
        store = FakeProductStore({"bad": {"name": "B", "stock": 2.5, "price": 3}})
        result = _run(store, ["product", "delete", "--id", "bad", "--yes"])
        assert result.exit_code == 0, result.output
        assert store.calls_named("remove") == [("remove", "products/bad")]
        assert store.snapshot() is None

    def test_missing_id_is_not_an_error(self, store):
        result = _run(store, ["product", "delete", "--id", "gone", "--yes"])
        assert result.exit_code == 0, result.output
        assert store.calls_named("remove") == [("remove", "products/gone")]


class TestWatch:

    def test_renders_current_table(self, store):
        result = _run(store, ["watch", "--no-clear", "--count", "1"])
        assert result.exit_code == 0, result.output
        assert "Bolts" in result.output
        assert store.subscriber_count == 0


class TestShell:

    def test_add_then_quit(self, store):
        session = "\n".join(["f", "Widget", "", "3", "2.50", "q"]) + "\n"
        result = _run(store, ["shell"], input=session)
        assert result.exit_code == 0, result.output
        assert store.calls_named("create") == [
            ("create", "products", {"name": "Widget", "category": "", "stock": 3, "price": 2.5})
        ]
        assert result.output.count("Widget") >= 2
        assert store.subscriber_count == 0

    def test_edit_keeps_defaults(self, store):
        session = "\n".join(["e", "k1", "", "", "40", "", "q"]) + "\n"
        result = _run(store, ["shell"], input=session)
        assert result.exit_code == 0, result.output
        assert store.calls_named("update") == [
            ("update", "products/k1",
             {"name": "Bolts", "category": "Hardware", "stock": 40, "price": 0.25})
        ]

    def test_delete_declined(self, store):
        session = "\n".join(["d", "k1", "n", "q"]) + "\n"
        result = _run(store, ["shell"], input=session)
        assert result.exit_code == 0, result.output
        assert store.calls_named("remove") == []


    def test_delete_unreadable_record(self):
        store = FakeProductStore({"bad": {"name": "B", "stock": -1, "price": 3}})
        session = "\n".join(["d", "bad", "y", "q"]) + "\n"
        result = _run(store, ["shell"], input=session)
        assert result.exit_code == 0, result.output
        assert "UNREADABLE" in result.output
        assert store.calls_named("remove") == [("remove", "products/bad")]


class TestJsonBackend:

    def test_add_and_list_through_configuration(self, tmp_path):
        runner = CliRunner()
        env = {
            "INVTRACK_BACKEND": "json",
            "INVTRACK_DATA_FILE": str(tmp_path / "products.json"),
            "INVTRACK_CONFIG": "",
        }
        with runner.isolated_filesystem(temp_dir=tmp_path):
            added = runner.invoke(
                cli,
                ["product", "add", "--name", "Widget", "--stock", "3", "--price", "2.50"],
                env=env,
            )
            assert added.exit_code == 0, added.output

            listed = runner.invoke(cli, ["product", "list"], env=env)
            assert listed.exit_code == 0, listed.output
            assert "Widget" in listed.output
            assert "$2.50" in listed.output

    def test_bad_configuration_reported(self, tmp_path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(
                cli,
                ["product", "list"],
                env={"INVTRACK_BACKEND": "mongo", "INVTRACK_CONFIG": ""},
            )
        assert result.exit_code == 1
        assert "Unknown store backend" in result.output
