# What it does: Manages all read/write operations for the `.subsys/config` file (submission settings such as the student id and assignment code)
# What data structure it uses: Map / Hash Table / Dictionary (the INI file format is a map of sections to key-value pairs, managed by Python's `configparser`)

import configparser
import os


def _split_key(key):
    try:
        section, option = key.split('.', 1)
    except ValueError:
        raise ValueError("Error: Invalid key format. Should be 'section.key'.")
    if not section or not option:
        raise ValueError("Error: Invalid key format. Should be 'section.key'.")
    return section, option


def read_config(repo): # Reads and returns the configuration as a ConfigParser object
    config = configparser.ConfigParser()
    if os.path.exists(repo.config_path):
        config.read(repo.config_path, encoding='utf-8')
    return config


def write_config(repo, key, value): # Sets a configuration key to a value and writes it to the config file
    section, option = _split_key(key)
    config = read_config(repo)

    if not config.has_section(section):
        config.add_section(section)

    config.set(section, option, value)

    with open(repo.config_path, 'w', encoding='utf-8') as configfile:
        config.write(configfile)


def get_config_value(repo, key): # Returns the value for 'section.key', or None if unset
    section, option = _split_key(key)
    return read_config(repo).get(section, option, fallback=None)


def get_submission_config(repo): # Retrieves submission.student_id and submission.assignment_code, or None if not set
    config = read_config(repo)

    student_id = config.get('submission', 'student_id', fallback=None)
    assignment_code = config.get('submission', 'assignment_code', fallback=None)

    return student_id, assignment_code
