"""Install the videousers accounts service."""

from setuptools import setup, find_packages

setup(
    name='videousers',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    python_requires='>=3.8',
    install_requires=[
        "flask",
        "flask-sqlalchemy",
        "sqlalchemy",
        "werkzeug",
        "wtforms",
        "pyjwt",
        "pytz",
        "cloudinary",
        "python-json-logger"
    ],
    extras_require={
        'test': [
            "pytest",
            "mimesis"
        ]
    },
    zip_safe=False
)
