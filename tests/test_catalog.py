"""Tests for the template catalog: loading, lookup, validation, reload."""

import os
import sys
import tempfile
import unittest
from pathlib import Path

os.environ.setdefault("EMAIL_WRITER_DATA_DIR", tempfile.mkdtemp(prefix="email-writer-test-"))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import email_writer.catalog as catalog


class TestCatalog(unittest.TestCase):
    """Built-in catalog contents and lookups."""

    def setUp(self):
        catalog.reload_catalog()

    def test_builtin_templates(self):
        ids = [t.id for t in catalog.list_templates()]
        self.assertEqual(
            ids,
            ["follow-up", "introduction", "meeting-request", "thank-you", "project-update", "apology"],
        )
        thank_you = catalog.get_template("thank-you")
        self.assertEqual(thank_you.name, "Thank You")
        self.assertEqual(thank_you.category, "Courtesy")
        self.assertTrue(thank_you.content.startswith("Thank you for [specific action/help/time]."))

    def test_get_template_unknown_raises(self):
        with self.assertRaises(ValueError) as ctx:
            catalog.get_template("nope")
        self.assertIn("Unknown template", str(ctx.exception))

    def test_find_template_prefers_id_then_name(self):
        """Stable id wins; display name is only a fallback for older entries."""
        self.assertEqual(catalog.find_template(template_id="apology").id, "apology")
        self.assertEqual(catalog.find_template(name="Meeting Request").id, "meeting-request")
        self.assertEqual(catalog.find_template(template_id="apology", name="Thank You").id, "apology")
        self.assertEqual(catalog.find_template(template_id="gone", name="Thank You").id, "thank-you")
        self.assertIsNone(catalog.find_template(template_id="gone", name="Also gone"))
        self.assertIsNone(catalog.find_template())


class TestCatalogOverride(unittest.TestCase):
    """TEMPLATES_CONFIG_PATH override and validation failures."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self._orig = os.environ.get("TEMPLATES_CONFIG_PATH")

    def tearDown(self):
        if self._orig is not None:
            os.environ["TEMPLATES_CONFIG_PATH"] = self._orig
        else:
            os.environ.pop("TEMPLATES_CONFIG_PATH", None)
        catalog.reload_catalog()
        self._tmp.cleanup()

    def _write(self, text: str) -> Path:
        path = Path(self._tmp.name) / "templates.yaml"
        path.write_text(text, encoding="utf-8")
        os.environ["TEMPLATES_CONFIG_PATH"] = str(path)
        return path

    def test_custom_catalog(self):
        self._write(
            "templates:\n"
            "  - {id: ping, name: Ping, category: Misc, description: Short ping, content: Just checking in.}\n"
        )
        loaded = catalog.reload_catalog()
        self.assertEqual([t.id for t in loaded], ["ping"])

    def test_missing_file(self):
        os.environ["TEMPLATES_CONFIG_PATH"] = str(Path(self._tmp.name) / "missing.yaml")
        with self.assertRaises(FileNotFoundError):
            catalog.reload_catalog()

    def test_duplicate_id_rejected(self):
        self._write(
            "templates:\n"
            "  - {id: a, name: A, category: c, description: d, content: x}\n"
            "  - {id: a, name: B, category: c, description: d, content: y}\n"
        )
        with self.assertRaises(ValueError) as ctx:
            catalog.reload_catalog()
        self.assertIn("Duplicate template id", str(ctx.exception))

    def test_duplicate_name_rejected(self):
        self._write(
            "templates:\n"
            "  - {id: a, name: Same, category: c, description: d, content: x}\n"
            "  - {id: b, name: Same, category: c, description: d, content: y}\n"
        )
        with self.assertRaises(ValueError) as ctx:
            catalog.reload_catalog()
        self.assertIn("Duplicate template name", str(ctx.exception))

    def test_missing_field_rejected(self):
        self._write("templates:\n  - {id: a, name: A}\n")
        with self.assertRaises(ValueError):
            catalog.reload_catalog()

    def test_invalid_yaml_rejected(self):
        self._write("templates: [unclosed\n")
        with self.assertRaises(ValueError) as ctx:
            catalog.reload_catalog()
        self.assertIn("Invalid YAML", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
