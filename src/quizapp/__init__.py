"""quizapp — quiz app backend.

User login with bcrypt-checked passwords, stateless JWT bearer tokens,
and a token gate in front of the protected user endpoints.
"""

__version__ = "0.1.0"
