from setuptools import setup

setup(
    name="patch_shap",
    version="0.1.0",
    description="Patch-level Monte-Carlo KernelSHAP attributions for image classifiers",
    python_requires=">=3.9",
    packages=[
        "patch_shap",
        "patch_shap.algorithms",
        "patch_shap.explainers",
        "patch_shap.tools",
        "patch_shap.utils",
    ],
    package_dir={"": "src"},
    install_requires=[
        "numpy",
        "torch",
        "opencv-python",
        "PyYAML",
        'toml; python_version < "3.11"',
    ],
    extras_require={
        "test": ["pytest"],
        "docs": ["sphinx", "furo"],
    },
    entry_points={
        "console_scripts": ["patch-shap=patch_shap.cli:main"],
    },
    zip_safe=False,
)
