from .ldap_adapter import LDAPAdapter, COMPUTER_ATTRIBUTES

__all__ = ['LDAPAdapter', 'COMPUTER_ATTRIBUTES']
