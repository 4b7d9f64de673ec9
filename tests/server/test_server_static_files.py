import tempfile
import unittest
from pathlib import Path

from server.static_files import guess_content_type, load_static_asset, resolve_static_file


class ServerStaticFilesTests(unittest.TestCase):
    def test_resolve_static_file_returns_file_inside_ui_root(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            app_js = ui_root / "assets" / "app.js"
            app_js.parent.mkdir(parents=True, exist_ok=True)
            app_js.write_text("console.log('ok');", encoding="utf-8")

            resolved = resolve_static_file(ui_root, "/assets/app.js")
            self.assertEqual(app_js.resolve(), resolved)

    def test_resolve_static_file_rejects_path_traversal(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            ui_root = root / "ui"
            ui_root.mkdir(parents=True, exist_ok=True)
            outside = root / "secret.txt"
            outside.write_text("x", encoding="utf-8")

            self.assertIsNone(resolve_static_file(ui_root, "/../secret.txt"))

    def test_resolve_static_file_rejects_hidden_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            (ui_root / ".env").write_text("SECRET=1", encoding="utf-8")

            self.assertIsNone(resolve_static_file(ui_root, "/.env"))

    def test_resolve_static_file_rejects_root_or_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            self.assertIsNone(resolve_static_file(ui_root, "/"))
            self.assertIsNone(resolve_static_file(ui_root, "/missing.txt"))

    def test_load_static_asset_reads_body_and_type(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            (ui_root / "styles.css").write_text("body{}", encoding="utf-8")

            asset = load_static_asset(ui_root, "/styles.css")

            if asset is None:
                self.fail("Expected the stylesheet to load")
            self.assertEqual(b"body{}", asset.body)
            self.assertEqual("text/css; charset=utf-8", asset.content_type)
            self.assertIsNone(load_static_asset(ui_root, "/nope.css"))

    def test_guess_content_type_sets_charset_for_text(self) -> None:
        self.assertEqual("text/css; charset=utf-8", guess_content_type(Path("styles.css")))
        js_type = guess_content_type(Path("app.js"))
        self.assertTrue(js_type.endswith("; charset=utf-8"))
        self.assertIn("javascript", js_type)

    def test_guess_content_type_falls_back_for_unknown_extensions(self) -> None:
        self.assertEqual(
            "application/octet-stream",
            guess_content_type(Path("blob.unknownbinaryextension")),
        )


if __name__ == "__main__":
    unittest.main()
