import rvmkit.exceptions as exceptions


def test_rvm_unavailable():
    exc = exceptions.RvmUnavailableError("rvm is not installed at /usr/local/rvm/bin/rvm")
    assert str(exc) == exc.message
    assert isinstance(exc, exceptions.CommandNotFoundError)


def test_non_string_message():
    exc = exceptions.RvmKitException(42)
    assert exc.message == exc.strerror == "42"


def test_command_execution_error_from_exception():
    exc = exceptions.CommandExecutionError(OSError("No such file"))
    assert str(exc) == "No such file"
    assert exc.strerror_without_changes == "No such file"


def test_default_ruby_not_set_is_command_execution_error():
    assert issubclass(
        exceptions.DefaultRubyNotSetError, exceptions.CommandExecutionError
    )


def test_invocation_error_is_type_error():
    assert issubclass(exceptions.RvmKitInvocationError, TypeError)
