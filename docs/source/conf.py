import os
import sys
import logging

# Also suppress specific Sphinx/autodoc logging
logging.getLogger('sphinx').setLevel(logging.ERROR)

# Add source path for documentation build
sys.path.insert(0, os.path.abspath('../../src'))

project = 'Patch SHAP'
author = 'Patch SHAP contributors'
release = '0.1.0'
version = '0.1.0'

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.autosummary',
    'sphinx.ext.mathjax',
    'sphinx.ext.intersphinx',
]

autosummary_generate = True

autodoc_default_options = {
    'members': True,
    'undoc-members': True,
    'show-inheritance': True,
}

# Disable type hints in signatures to avoid unresolved torch references
autodoc_typehints = 'none'

# torch and cv2 are heavy and not needed to render docstrings
autodoc_mock_imports = ['torch', 'cv2']

autodoc_inherit_docstrings = False
autodoc_preserve_defaults = True

napoleon_google_docstring = False
napoleon_numpy_docstring = True
napoleon_use_param = True
napoleon_use_rtype = True

templates_path = ['_templates']
exclude_patterns = []

html_theme = "furo"

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'numpy': ('https://numpy.org/doc/stable/', None),
    'torch': ('https://pytorch.org/docs/stable/', None),
}
