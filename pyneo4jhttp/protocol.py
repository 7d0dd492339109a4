"""Constants for the Neo4j transactional HTTP protocol.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

# pylint: disable=bad-whitespace

# Default ports
HTTP_PORT                         = 7474
HTTPS_PORT                        = 7473

# Endpoints
TRANSACTION_PATH                  = '/db/data/transaction'
COMMIT_SUFFIX                     = '/commit'
SERVICE_ROOT_PATH                 = '/db/data/'

# Request / response keys
STATEMENTS                        = 'statements'
STATEMENT                         = 'statement'
PARAMETERS                        = 'parameters'
INCLUDE_STATS                     = 'includeStats'
RESULT_DATA_CONTENTS              = 'resultDataContents'
ROW_CONTENT                       = 'row'
RESULTS                           = 'results'
COLUMNS                           = 'columns'
DATA                              = 'data'
STATS                             = 'stats'
ERRORS                            = 'errors'
NOTIFICATIONS                     = 'notifications'
COMMIT                            = 'commit'
TRANSACTION                       = 'transaction'
EXPIRES                           = 'expires'
CODE                              = 'code'
MESSAGE                           = 'message'

# Statistics returned with includeStats
NODES_CREATED                     = 'nodes_created'
NODES_DELETED                     = 'nodes_deleted'
RELATIONSHIPS_CREATED             = 'relationships_created'
# The server really does spell this one in the singular.
RELATIONSHIP_DELETED              = 'relationship_deleted'
PROPERTIES_SET                    = 'properties_set'
LABELS_ADDED                      = 'labels_added'
LABELS_REMOVED                    = 'labels_removed'
INDEXES_ADDED                     = 'indexes_added'
INDEXES_REMOVED                   = 'indexes_removed'
CONSTRAINTS_ADDED                 = 'constraints_added'
CONSTRAINTS_REMOVED               = 'constraints_removed'
CONTAINS_UPDATES                  = 'contains_updates'

STAT_KEYS = (NODES_CREATED, NODES_DELETED,
             RELATIONSHIPS_CREATED, RELATIONSHIP_DELETED,
             PROPERTIES_SET, LABELS_ADDED, LABELS_REMOVED,
             INDEXES_ADDED, INDEXES_REMOVED,
             CONSTRAINTS_ADDED, CONSTRAINTS_REMOVED)

# Only these stats contribute to an update count
UPDATE_COUNT_KEYS = (NODES_CREATED, NODES_DELETED,
                     RELATIONSHIPS_CREATED, RELATIONSHIP_DELETED)

# Status codes
TRANSACTION_NOT_FOUND             = 'Neo.ClientError.Transaction.TransactionNotFound'
UNKNOWN_TRANSACTION_ID            = 'Neo.ClientError.Transaction.UnknownId'

EXPIRED_TRANSACTION_CODES = (TRANSACTION_NOT_FOUND, UNKNOWN_TRANSACTION_ID)

# Status code classification: exact codes first, then prefixes
DATA_ERRORS = ('Neo.ClientError.Statement.TypeError',
               'Neo.ClientError.Statement.ArithmeticError',
               'Neo.ClientError.Statement.ArgumentError',
               'Neo.ClientError.Statement.InvalidArguments',
               'Neo.ClientError.Statement.InvalidType')

INTEGRITY_ERRORS = ('Neo.ClientError.Schema.ConstraintValidationFailed',
                    'Neo.ClientError.Schema.ConstraintViolation',
                    'Neo.ClientError.Statement.ConstraintVerificationFailed',
                    'Neo.ClientError.Statement.ConstraintViolation')

PROGRAMMING_ERROR_PREFIXES = ('Neo.ClientError.Statement.',
                              'Neo.ClientError.Request.',
                              'Neo.ClientError.Schema.',
                              'Neo.ClientError.Procedure.',
                              'Neo.ClientError.Security.',
                              'Neo.ClientError.Transaction.')

OPERATIONAL_ERROR_PREFIXES = ('Neo.TransientError.',)

INTERNAL_ERROR_PREFIXES = ('Neo.DatabaseError.',)


def lookup_code(code):
    # type: (str) -> str
    """Return the short name of a status code.

    Neo.ClientError.Statement.SyntaxError -> Statement.SyntaxError
    """
    parts = code.split('.')
    if len(parts) == 4 and parts[0] == 'Neo':
        return '%s.%s' % (parts[2], parts[3])
    return code
