"""Install the account store package."""

from setuptools import setup, find_packages

setup(
    name='accountstore',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    python_requires='>=3.9',
    install_requires=[
        "pydantic>=2",
        "pymongo>=4.13",
        "bcrypt",
        "python-json-logger>=3.1",
        "mimesis",
    ],
    extras_require={
        'test': [
            "pytest",
            "pytest-asyncio",
            "hypothesis",
            "mongomock-motor",
        ],
    },
    zip_safe=False
)
