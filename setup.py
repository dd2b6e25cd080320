from setuptools import setup, find_packages


setup_options = dict(
    name="insfusion",
    version="1.0",
    description="Loosely coupled IMU/GNSS integration with error-state Kalman filter",
    license="MIT",
    packages=find_packages(include=["insfusion", "insfusion.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.7",
    install_requires=["numpy", "scipy", "pandas", "PyYAML"],
    extras_require={"test": ["pytest"]},
)

setup(**setup_options)
