import setuptools

setuptools.setup(
    name="k230img",
    version="0.3.0",
    author="The k230img contributors",
    description=("K230 firmware image encryption and signing"),
    license="Apache Software License",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.7",
    install_requires=[
        'cryptography>=3.3',
        'gmssl>=3.2.1',
        'intelhex>=2.2.1',
        'rsa>=4.7',
        'PyYAML',
        'click',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        "console_scripts": ["k230img=k230img.main:k230img"]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Development Status :: 4 - Beta",
        "Topic :: Software Development :: Build Tools",
        "License :: OSI Approved :: Apache Software License",
    ],
)
