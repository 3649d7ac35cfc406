import sys

from patch_shap.cli import main

sys.exit(main())
