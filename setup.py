from setuptools import setup
from glob import glob

package_name = 'timetrack_sim'

setup(
    name=package_name,
    version='0.1.0',
    packages=[package_name],
    data_files=[
        ('share/' + package_name + '/config/scenarios', glob('config/scenarios/*.yaml')),
    ],
    python_requires='>=3.8',
    install_requires=['setuptools', 'numpy', 'PyYAML'],
    extras_require={
        'analysis': ['pandas', 'matplotlib'],
        'test': ['pytest'],
    },
    zip_safe=True,
    description='Remote clock report simulator (offset, skew, delay, pause/rewind, garbage) and clock tracker test bench.',
    license='Apache-2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'timetrack-sim = timetrack_sim.cli:main',
        ],
    },
)
