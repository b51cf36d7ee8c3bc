from setuptools import setup, find_packages

setup(
    name="bond_cashflow_engine",
    version="0.1.0",
    description="Cash flow projection and valuation for step-up amortizing bonds",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "bond-cashflows=bond_cashflow_engine.cli:main",
        ],
    },
    python_requires=">=3.8",
)
