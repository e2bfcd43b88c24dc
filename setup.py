import re
import ast
from setuptools import setup

_version_re = re.compile(r'__version__\s+=\s+(.*)')
with open('chinooklessons/__init__.py', 'rb') as f:
    version = str(ast.literal_eval(_version_re.search(
        f.read().decode('utf-8')).group(1)))

setup(
    name='ChinookLessons',
    version=version,
    license='MIT',
    description='SQL lessons and challenges on the Chinook database, '
                'with a runner that checks the expected results.',
    packages=['chinooklessons'],
    package_data={'chinooklessons': ['lessons/*.sql']},
    include_package_data=True,
    zip_safe=False,
    platforms='any',
    python_requires='>=3.9',
    install_requires=[
        'SQLAlchemy>=2.0',
        'requests>=2.20'
    ],
    extras_require={
        'test': ['pytest'],
        'docs': ['sphinx', 'sphinx_rtd_theme']
    },
    entry_points={
        'console_scripts': [
            'chinook-lessons = chinooklessons.cli:main'
        ]
    },
    keywords=['sql', 'sqlite', 'chinook', 'tutorial', 'sqlalchemy'],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Database :: Front-Ends",
        "Topic :: Education",
        "Operating System :: OS Independent"
    ]
)
