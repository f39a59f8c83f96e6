"""
User accounts service.

The user service is a Flask application that provides a JSON API for user
account management and authentication. It is the primary repository for user
records and their credentials, and it issues and validates the JSON Web Tokens
that other services use to identify the requesting user.

Context
-------
Clients register a user account by posting a name, e-mail address and
password. The password is never stored; a salted adaptive hash is kept in a
separate credentials table, owned exclusively by the user record.

Clients exchange an e-mail address and password for a signed token carrying
the user's id and admin flag. That token is then sent as a bearer token on
subsequent requests. Users may read, update and delete their own account;
administrators may act on any account.

Deleting an account is a soft delete: the user record is kept (so that
references from other services stay valid), but its name is replaced with a
sentinel, its e-mail address is cleared, and its credentials are destroyed.
Only users with an e-mail address are considered active.

Structure
---------
- :mod:`.domain` defines the core data structures.
- :mod:`.services` provides the password and token codecs, the datastore, and
  :class:`.services.users.UserService`, which orchestrates them.
- :mod:`.authorization` holds the access policy and the bearer-token guard.
- :mod:`.controllers` and :mod:`.routes` bind the service to HTTP.

"""
