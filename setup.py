"""Install the accounts API."""

from setuptools import setup, find_packages

setup(
    name='restapi',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    py_modules=['wsgi'],
    python_requires='>=3.8',
    install_requires=[
        "flask>=2.3",
        "werkzeug>=2.3",
        "sqlalchemy>=1.4",
        "pyjwt>=2",
        "redis",
        "fakeredis",
        "pytz",
        "wtforms",
        "email-validator",
        "bcrypt",
        "python-json-logger>=3.1",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ]
    },
    zip_safe=False
)
