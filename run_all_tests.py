"""Test Summary Script - Runs every app's test suite and reports results"""
import re
import subprocess
import sys

TEST_MODULES = [
    'core.user_accounts.tests',
    'HR.work_structures.tests',
    'HR.person.tests',
    'HR.career.tests',
    'HR.employee_requests.tests',
]


def _empty(module, status):
    return {'module': module, 'total': 0, 'passed': 0, 'failed': 0, 'status': status}


def run_tests(module):
    """Run tests for a specific module and return results"""
    try:
        result = subprocess.run(
            [sys.executable, 'manage.py', 'test', module, '-v', '0'],
            capture_output=True,
            text=True,
            timeout=300
        )
    except subprocess.TimeoutExpired:
        return _empty(module, 'TIMEOUT')

    output = result.stdout + result.stderr
    match = re.search(r'Ran (\d+) test', output)
    if not match:
        return _empty(module, 'NO TESTS')

    test_count = int(match.group(1))
    failure_match = re.search(r'failures=(\d+)', output)
    error_match = re.search(r'errors=(\d+)', output)
    failed = sum(int(m.group(1)) for m in (failure_match, error_match) if m)
    return {
        'module': module,
        'total': test_count,
        'passed': test_count - failed,
        'failed': failed,
        'status': 'FAILED' if result.returncode else 'OK'
    }


def main():
    print("=" * 80)
    print("CAREER TEST SUITE SUMMARY")
    print("=" * 80)

    results = []
    for module in TEST_MODULES:
        print(f"Running {module}...", end=' ', flush=True)
        result = run_tests(module)
        results.append(result)
        print(f"{result['status']} - {result['total']} tests")

    total_tests = sum(r['total'] for r in results)
    total_failed = sum(r['failed'] for r in results)

    print()
    print("=" * 80)
    print(f"Total Tests: {total_tests}")
    print(f"Passed: {total_tests - total_failed}")
    print(f"Failed: {total_failed}")
    print("-" * 80)
    for result in results:
        status_icon = "✅" if result['status'] == 'OK' else "❌"
        print(f"{status_icon} {result['module']:50} {result['passed']:4}/{result['total']:4} passed")
    print("=" * 80)

    sys.exit(0 if all(r['status'] == 'OK' for r in results) else 1)


if __name__ == '__main__':
    main()
