# setup.py
from setuptools import setup, find_packages

setup(
    name="site_audit",
    version="0.1.0",
    description="Обнаружение страниц сайта и поэтапный аудит SiteAudit",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"site_audit": ["report/templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=5.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "site-audit=site_audit.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
