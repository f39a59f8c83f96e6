"""Install the user service."""

from setuptools import setup, find_packages

setup(
    name='user-service',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    package_data={'user_service': ['schema/*.json']},
    entry_points={
        'console_scripts': ['user-service=user_service.cli:cli']
    },
    install_requires=[
        "flask",
        "flask-sqlalchemy",
        "sqlalchemy",
        "mimesis",
        "python-dateutil",
        "pytz",
        "pyjwt",
        "bcrypt",
        "jsonschema",
        "click",
        "python-json-logger>=3.1"
    ],
    extras_require={
        'test': ['pytest']
    },
    zip_safe=False
)
