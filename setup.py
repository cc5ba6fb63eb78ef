from setuptools import setup, find_packages
setup(
    name="aoi_soils",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "fastapi>=0.100",
        "pydantic>=2",
        "requests>=2.28",
        "shapely>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7", "httpx>=0.24"]
    },
    entry_points={
        'console_scripts': [
            'aoi-soils=aoi_soils.__main__:_safe_main'
        ]
    }
)
