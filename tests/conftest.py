"""Pytest configuration and shared Blue Prism export fixtures."""

from pathlib import Path

import pytest

PROCESS_XML = """<?xml version="1.0" encoding="utf-8"?>
<process name="Invoice Processing" version="1.2" bpversion="6.10.1.12345" narrative="Processes supplier invoices">
  <view><camerax>0</camerax><cameray>0</cameray><zoom version="2">1.25</zoom></view>
  <preconditions />
  <endpoint narrative="" />
  <subsheet subsheetid="ss-load" type="Normal" published="False">
    <name>Load Data</name>
    <view><camerax>0</camerax><cameray>0</cameray></view>
  </subsheet>
  <subsheet subsheetid="ss-report" type="Normal" published="False">
    <name>Send Report</name>
  </subsheet>
  <stage stageid="st-1" name="Start" type="Start">
    <loginhibit onsuccess="true" />
  </stage>
  <stage stageid="st-2" name="Get Current Date" type="Action">
    <inputs />
    <resource object="Utility - Date and Time" action="Get Current Date" />
  </stage>
  <stage stageid="st-3" name="Check input" type="Note" />
  <stage stageid="st-4" name="[Excel] Open Workbook" type="Action" subsheetid="ss-load" />
  <stage stageid="st-5" name="Get Today" type="Action">
    <subsheetid>ss-load</subsheetid>
    <resource object="Utility - Date and Time" action="Get Current Date" />
  </stage>
  <stage stageid="st-6" name="[Excel] Open Workbook" type="Action" subsheetid="ss-load" />
  <stage stageid="st-7" name="Send Email" type="Action" subsheetid="ss-report">
    <resource object="Email - POP3/SMTP" action="Send Message" />
  </stage>
  <stage stageid="st-8" name="Excel Database Export" type="Action" subsheetid="ss-report" />
  <stage stageid="st-9" name="Email summary" type="Action" subsheetid="ss-report">
    <resource object="Custom Reporting" action="Publish" />
  </stage>
  <stage stageid="st-10" name="" type="Action" subsheetid="ss-report" />
  <stage stageid="st-11" name="Write File" type="Action" subsheetid="ss-report">
    <resource object="" action="Write" />
  </stage>
</process>
"""

VBO_XML = """<?xml version="1.0" encoding="utf-8"?>
<process name="Calculator VBO" version="2.0" bpversion="6.10.1.12345" narrative="Drives the calculator" type="object" runmode="Exclusive">
  <appdef>
    <element name="Calculator">
      <id>el-root</id>
      <type>Application</type>
      <basetype>Application</basetype>
      <datatype>unknown</datatype>
      <diagnose>False</diagnose>
      <element name="Main Window">
        <id>el-win</id>
        <type>Window</type>
        <basetype>Window</basetype>
        <attributes>
          <attribute name="WindowText" inuse="True">
            <ProcessValue datatype="text" value="Calculator" />
          </attribute>
          <attribute name="ClassName">
            <ProcessValue datatype="text" value="CalcFrame" />
          </attribute>
          <attribute name="Visible" inuse="true">
            <ProcessValue datatype="flag" value="True" />
          </attribute>
          <attribute name="Empty" />
        </attributes>
        <group name="Buttons">
          <id>grp-buttons</id>
          <element name="Equals">
            <id>el-eq</id>
            <type>Button</type>
          </element>
        </group>
        <element name="Broken">
          <type>Button</type>
          <element name="Lost Child">
            <id>el-lost</id>
            <type>Button</type>
          </element>
        </element>
      </element>
    </element>
  </appdef>
  <subsheet subsheetid="ss-add" type="Normal" published="True">
    <name>Add</name>
  </subsheet>
  <subsheet subsheetid="ss-read" type="Normal" published="True">
    <name>Read Result</name>
  </subsheet>
  <stage stageid="info-main" name="Initialise" type="SubSheetInfo">
    <narrative>   </narrative>
  </stage>
  <stage stageid="info-add" name="Add" type="SubSheetInfo">
    <subsheetid>ss-add</subsheetid>
    <narrative>  Adds two numbers  </narrative>
  </stage>
  <stage stageid="start-add" name="Start" type="Start">
    <subsheetid>ss-add</subsheetid>
    <inputs>
      <input type="number" name="A" narrative="First operand" />
      <input type="number" name="B" />
    </inputs>
  </stage>
  <stage stageid="end-add" name="End" type="End">
    <subsheetid>ss-add</subsheetid>
    <outputs>
      <output type="number" name="Sum" />
    </outputs>
  </stage>
  <stage stageid="info-read" name="Read Result" type="SubSheetInfo">
    <subsheetid>ss-read</subsheetid>
    <inputs>
      <input name="Timeout" />
    </inputs>
  </stage>
</process>
"""

RELEASE_XML = """<?xml version="1.0" encoding="utf-8"?>
<bpr:release xmlns:bpr="http://www.blueprism.co.uk/product/release">
  <bpr:name>Q3 Release</bpr:name>
  <bpr:release-notes>Quarterly drop</bpr:release-notes>
  <bpr:created>2024-07-01 09:30:00Z</bpr:created>
  <bpr:package-id>7</bpr:package-id>
  <bpr:package-name>Finance Package</bpr:package-name>
  <bpr:user-created-by>admin</bpr:user-created-by>
  <bpr:contents count="4">
    <process id="p-1" name="Invoice Processing" published="True" xmlns="http://www.blueprism.co.uk/product/process">
      <process name="Invoice Processing" version="1.2" narrative="Processes invoices">
        <subsheet subsheetid="s1" type="Normal"><name>Load</name></subsheet>
        <stage stageid="a" name="Excel - Open Workbook" type="Action" />
        <stage stageid="b" name="Read Sheet" type="Action" subsheetid="s1">
          <resource object="MS Excel VBO" action="Get Worksheet As Collection" />
        </stage>
      </process>
    </process>
    <object id="o-1" name="Calculator VBO" xmlns="http://www.blueprism.co.uk/product/object">
      <process name="Calculator VBO" version="2.0" type="object">
        <appdef>
          <element name="Calculator">
            <id>e1</id>
            <type>Application</type>
            <element name="Window"><id>e2</id><type>Window</type></element>
          </element>
        </appdef>
        <stage stageid="i1" name="Add" type="SubSheetInfo" />
      </process>
    </object>
    <object id="o-2" name="Utility - Strings" xmlns="http://www.blueprism.co.uk/product/object" />
    <work-queue id="q1" name="Invoices" xmlns="http://www.blueprism.co.uk/product/work-queue" />
  </bpr:contents>
</bpr:release>
"""


@pytest.fixture
def process_xml():
    """Process export with main-page and subsheet stages of every kind."""
    return PROCESS_XML


@pytest.fixture
def vbo_xml():
    """Object export with actions and an Application Modeller tree."""
    return VBO_XML


@pytest.fixture
def release_xml():
    """Release bundle with one process, one VBO and one referenced-only VBO."""
    return RELEASE_XML


@pytest.fixture
def build_process():
    """Factory wrapping stage/subsheet markup in a process document."""
    def _build(body: str, name: str = "Test Process") -> str:
        return f'<?xml version="1.0" encoding="utf-8"?>\n<process name="{name}">{body}</process>'
    return _build


@pytest.fixture
def write_export(tmp_path):
    """Factory writing export content to a temporary file."""
    def _write(file_name: str, content: str) -> Path:
        path = tmp_path / file_name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
