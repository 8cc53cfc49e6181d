from setuptools import setup, find_namespace_packages  # type: ignore

setup(
    name='avstools',
    version='0.1.0',
    packages=find_namespace_packages(include=['avstools', 'avstools.*']),
    install_requires=[
        'openai',
        'requests',
        'loguru',
    ],
    author='AVS Strategy Oracle Contributors',
    description='Yield farming strategy tasks with fuzzy validation for AVS performer and validator nodes',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.11',
    entry_points={
        'console_scripts': [
            'avstools=avstools.cli:main',
        ],
    },
)
