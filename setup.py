from setuptools import find_packages, setup

package_name = 'bot_kinematics'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/' + package_name + '/config', ['config/kinematics.yaml']),
    ],
    python_requires='>=3.8',
    install_requires=['setuptools', 'numpy', 'scipy', 'pin', 'PyYAML'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='you',
    maintainer_email='you@example.com',
    description='Closed-form FK/IK and seed-based solution selection for a 3-joint arm',
    license='Apache-2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'bot_ik = bot_kinematics.nodes.ik_cli:main',
        ],
    },
)
