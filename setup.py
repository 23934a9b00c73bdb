# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="prompt4ai",
    version="0.1.0",
    description="Herramienta para componer prompts de LLM a partir de ficheros de un proyecto",
    author="Prompt4AI Maintainers",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["prompt4ai*"]),
    python_requires=">=3.9",
    install_requires=[
        "tiktoken>=0.7",  # Conteo de tokens BPE (o200k_base)
        "pathspec>=0.12",  # Reglas .gitignore
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        'console_scripts': [
            'prompt4ai=prompt4ai.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
