#!/usr/bin/env python3
"""
Test runner script for the options chain codec.
Provides convenient test execution with different configurations.
"""

import os
import sys
import subprocess
import argparse
from pathlib import Path


def run_command(cmd, description=""):
    """Run a shell command and handle errors."""
    print(f"\n{'='*60}")
    print(f"Running: {description or cmd}")
    print(f"{'='*60}")

    result = subprocess.run(cmd, shell=True, capture_output=False)

    if result.returncode != 0:
        print(f"❌ Command failed with return code {result.returncode}")
        return False
    print("✅ Command completed successfully")
    return True


def run_unit_tests():
    """Run unit tests only."""
    return run_command("python -m pytest tests/unit/ -v --tb=short", "Unit Tests")


def run_integration_tests():
    """Run integration tests only."""
    return run_command("python -m pytest tests/integration/ -v --tb=short", "Integration Tests")


def run_all_tests():
    """Run all tests."""
    return run_command("python -m pytest tests/ -v --tb=short", "All Tests")


def run_coverage_report():
    """Generate coverage report."""
    cmd = "python -m pytest tests/ --cov=options_chain --cov-report=html --cov-report=term-missing"
    return run_command(cmd, "Coverage Report")


def run_specific_test(test_path):
    """Run a specific test file or test function."""
    return run_command(f"python -m pytest {test_path} -v --tb=short", f"Specific Test: {test_path}")


def check_test_environment():
    """Check if test environment is properly set up."""
    print("\n" + "="*60)
    print("Checking Test Environment")
    print("="*60)

    python_version = sys.version_info
    print(f"Python version: {python_version.major}.{python_version.minor}.{python_version.micro}")

    if python_version < (3, 9):
        print("❌ Python 3.9+ required")
        return False

    # Import names, not distribution names
    required_packages = [
        'pytest',
        'pytest_cov',
        'pydantic',
        'structlog',
        'colorama',
        'yaml',
        'jsonschema',
    ]

    missing_packages = []
    for package in required_packages:
        try:
            __import__(package)
            print(f"✅ {package} is available")
        except ImportError:
            print(f"❌ {package} is missing")
            missing_packages.append(package)

    if missing_packages:
        print(f"\nMissing packages: {', '.join(missing_packages)}")
        print("Install with: pip install -e '.[dev]'")
        return False

    project_root = Path(__file__).parent.parent
    for dir_path in ['src/options_chain', 'tests', 'tests/unit', 'tests/integration', 'tests/fixtures']:
        if (project_root / dir_path).exists():
            print(f"✅ {dir_path}/ exists")
        else:
            print(f"❌ {dir_path}/ missing")
            return False

    print("\n✅ Test environment is properly configured")
    return True


def main():
    """Main test runner function."""
    parser = argparse.ArgumentParser(
        description="Test runner for the options chain codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python run_tests.py --unit                # Run unit tests only
    python run_tests.py --integration         # Run integration tests only
    python run_tests.py --coverage            # Generate coverage report
    python run_tests.py --check-env           # Check test environment
    python run_tests.py --specific tests/unit/test_decoder.py
        """
    )

    parser.add_argument('--unit', action='store_true', help='Run unit tests only')
    parser.add_argument('--integration', action='store_true', help='Run integration tests only')
    parser.add_argument('--all', action='store_true', help='Run all tests')
    parser.add_argument('--coverage', action='store_true', help='Generate coverage report')
    parser.add_argument('--specific', type=str, help='Run specific test file or function')
    parser.add_argument('--check-env', action='store_true', help='Check test environment')

    args = parser.parse_args()

    # Change to project root directory
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    if args.check_env and not check_test_environment():
        sys.exit(1)

    if args.unit:
        success = run_unit_tests()
    elif args.integration:
        success = run_integration_tests()
    elif args.coverage:
        success = run_coverage_report()
    elif args.specific:
        success = run_specific_test(args.specific)
    else:
        success = run_all_tests()

    if not success:
        print("\n❌ Tests failed!")
        sys.exit(1)
    print("\n✅ All tests passed!")
    sys.exit(0)


if __name__ == "__main__":
    main()
