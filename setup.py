# payza_gateway/setup.py
from setuptools import setup, find_packages

setup(
    name="payza_gateway",
    version="0.1.0",
    description="Payza hosted checkout and IPN integration (Django plugin app)",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "Django>=3.2",
        "requests>=2.25",
        "edx-django-utils>=5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-django>=4.5",
        ],
    },
    entry_points={
        "lms.djangoapp": [
            "payza_gateway = payza_gateway.apps:PayzaGatewayConfig",
        ],
    },
)
