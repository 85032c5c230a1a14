"""
Smoke tests to verify basic application integrity.
Ensures that all modules can be imported without errors.
"""
import unittest

class TestSmoke(unittest.TestCase):
    def test_import_textual_app(self):
        """Test that cratedui.textual_app can be imported successfully."""
        try:
            import cratedui.textual_app
        except ImportError as e:
            self.fail(f"Failed to import cratedui.textual_app: {e}")

    def test_import_main_module(self):
        """Test that cratedui.__main__ can be imported successfully."""
        try:
            import cratedui.__main__
        except ImportError as e:
            self.fail(f"Failed to import cratedui.__main__: {e}")

    def test_import_backend(self):
        """Test that cratedui.backend can be imported successfully."""
        try:
            import cratedui.backend
        except ImportError as e:
            self.fail(f"Failed to import cratedui.backend: {e}")

    def test_every_tab_has_a_label(self):
        from cratedui.model import Tab
        from cratedui.render import tab_label
        for tab in Tab:
            self.assertTrue(tab_label(tab).endswith(tab.title))

if __name__ == '__main__':
    unittest.main()
