import os
import sys

sys.path.insert(0, os.path.abspath(".."))
project = "wpoverflow"
copyright = "2026, wpoverflow contributors"
author = "wpoverflow contributors"
release = "0.1.0"
version = "0.1"
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx.ext.intersphinx",
    "sphinx.ext.doctest",
]
templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]
html_theme = "sphinx_rtd_theme"
html_title = "wpoverflow Documentation"
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "undoc-members": True,
    "show-inheritance": True,
}
autodoc_typehints = "description"
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_use_param = True
napoleon_use_rtype = True
intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "z3": ("https://z3prover.github.io/api/html/", None),
}
autosummary_generate = True
