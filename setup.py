import os
from setuptools import setup

def read(name):
    with open(os.path.join(os.path.dirname(__file__), name), 'r') as f:
        return f.read()

setup(
    name="kitsu.tunnel",
    version="0.1.0",
    description="HTTP CONNECT tunnel client for Python",
    long_description=read('README'),
    author="Alexey Borzenkov",
    author_email="snaury@gmail.com",
    url="https://github.com/snaury/kitsu.http",
    license="MIT License",
    platforms=['any'],
    packages=['kitsu', 'kitsu.tunnel'],
    python_requires='>=3.7',
    install_requires=['Twisted>=19.7'],
    extras_require={
        'test': ['pytest'],
    },
    test_suite='tests.test_suite',
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Framework :: Twisted',
        'Operating System :: OS Independent',
        'Topic :: Internet :: Proxy Servers',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
)
