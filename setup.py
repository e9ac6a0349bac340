from setuptools import setup, find_packages

requires = [
    'pyramid',
    'pyramid-jinja2',
    'pyramid-debugtoolbar',
    'SQLAlchemy',
    'alembic',
    'psycopg2-binary',
    'PyJWT',
    'bcrypt',
    'marshmallow',
    'waitress',
    'python-dotenv',
]

tests_require = [
    'pytest',
    'pytest-cov',
    'webtest',
]

setup(
    name='booking_api',
    version='0.1.0',
    description='Booking module API: category dashboard, option form configuration, manager tables',
    packages=find_packages(exclude=('tests',)),
    py_modules=['waitress_server'],
    include_package_data=True,
    zip_safe=False,
    install_requires=requires,
    extras_require={
        'testing': tests_require,
    },
    entry_points={
        'paste.app_factory': [
            'main = booking_api:main',
        ],
        'paste.filter_app_factory': [
            'request_logging = booking_api.middleware.logging_middleware:create_logging_middleware',
        ],
    },
)
