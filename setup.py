import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

packages = setuptools.find_packages(exclude=["tests"])
entry_points={
    'console_scripts': [
        'luaminify=luaminify.__main__:main',
    ],
}

setuptools.setup(
    name="luaminify",
    version="0.1.0",
    author="Nick Setzer",
    author_email="nicksetzer@github.com",
    description="Lua minifier and beautifier",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/nsetzer/luaminify",
    packages=packages,
    entry_points=entry_points,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.6',
)
