from setuptools import find_packages, setup

setup(
    name="exif-photo-sort",
    version="0.3.0",
    description="Sort photo dumps into RAW/JPEG date folders with HDR and burst sequence folders",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=[
        "Pillow>=10.0",
        "piexif>=1.1.3",
        "PyExifTool>=0.5.6",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "exif-photo-sort=exif_photo_sort.main:main",
        ],
    },
)
