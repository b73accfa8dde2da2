import subprocess


def run_shell_command(command, env=None, cwd=None):
    """
    Executes a command and captures its output.

    Args:
        command (list): The command to execute as a list of strings.
        env (dict, optional): A dictionary of environment variables.
        cwd (str, optional): The working directory for the command.

    Returns:
        A tuple (stdout, stderr, return_code). A missing executable is
        reported as return code -1 with the error in stderr.
    """
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            env=env,
            check=False,
            cwd=cwd
        )
        return result.stdout, result.stderr, result.returncode
    except FileNotFoundError as e:
        return "", f"Command not found: {e.filename}", -1
